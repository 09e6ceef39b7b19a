from __future__ import annotations

from src.hr_messaging.hr_messaging.users.mysql_user_repository import MySQLUserDirectory


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self._rows = []

    def execute(self, sql, params=None):
        self._conn.executed.append((" ".join(sql.split()), params))
        self._rows = self._conn.results.pop(0)

    def fetchall(self):
        return self._rows

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, results):
        self.results = list(results)
        self.executed = []
        self.committed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, conn):
        self._conn = conn

    def connect(self):
        return self._conn


def test_members_are_matched_by_normalized_department_name():
    conn = FakeConnection(
        [
            [
                {"dept_id": 1, "dept_name": "Human Resources"},
                {"dept_id": 2, "dept_name": "Sales"},
                {"dept_id": 3, "dept_name": "  "},
            ],
            [{"user_id": 4}, {"user_id": 9}],
        ]
    )

    members = MySQLUserDirectory(FakeConnectionFactory(conn)).list_department_members("human   RESOURCES")

    assert members == [4, 9]
    sql, params = conn.executed[1]
    assert "dept_id IN (%s)" in sql
    assert params == (1,)


def test_unknown_department_has_no_members():
    conn = FakeConnection([[{"dept_id": 2, "dept_name": "Sales"}]])

    assert MySQLUserDirectory(FakeConnectionFactory(conn)).list_department_members("Finance") == []
    assert len(conn.executed) == 1
