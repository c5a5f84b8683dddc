import mysql.connector
import pytest
from mysql.connector import errorcode

from src.school_admin.school_admin.associations.mysql_association_repository import MySQLAssociationRepository
from src.school_admin.school_admin.core.enums import Relation
from src.school_admin.school_admin.core.exceptions import StorageError


class ScriptedCursor:
    def __init__(self, conn):
        self._conn = conn
        self._rows = []
        self.rowcount = 0

    def execute(self, sql, params=()):
        self._conn.statements.append((" ".join(sql.split()), tuple(params)))
        if sql.startswith("INSERT"):
            target = params[1]
            if target in self._conn.insert_errors:
                raise mysql.connector.IntegrityError(msg="insert failed", errno=self._conn.insert_errors[target])
        self._rows = [{"target_id": t} for t in self._conn.locked_rows] if sql.startswith("SELECT") else []

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, locked_rows=(), insert_errors=None):
        self.locked_rows = list(locked_rows)
        self.insert_errors = dict(insert_errors or {})
        self.statements = []
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return ScriptedCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class ScriptedFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self, *, with_database=True):
        return self.conn


def _repo(**kwargs):
    conn = ScriptedConnection(**kwargs)
    return MySQLAssociationRepository(ScriptedFactory(conn)), conn


def test_replace_diffs_against_locked_rows_in_one_transaction():
    repo, conn = _repo(locked_rows=[2, 3, 4])

    attached, detached = repo.replace(relation=Relation.BRANCHES, owner_id=7, target_ids=[1, 2])

    assert attached == [1]
    assert detached == [3, 4]
    select, delete, insert = conn.statements
    assert select[0].endswith("FOR UPDATE")
    assert delete == ("DELETE FROM branches_users WHERE user_id=%s AND branch_id NOT IN (%s,%s)", (7, 1, 2))
    assert insert == ("INSERT INTO branches_users(user_id, branch_id) VALUES(%s,%s)", (7, 1))
    assert conn.committed


def test_replace_with_empty_submission_deletes_every_link():
    repo, conn = _repo(locked_rows=[10, 11])

    attached, detached = repo.replace(relation=Relation.PROGRAMS, owner_id=7, target_ids=[])

    assert (attached, detached) == ([], [10, 11])
    assert conn.statements[-1] == ("DELETE FROM programs_users WHERE user_id=%s", (7,))


def test_replace_without_changes_writes_nothing():
    repo, conn = _repo(locked_rows=[1, 2])

    assert repo.replace(relation=Relation.BRANCHES, owner_id=7, target_ids=[2, 1]) == ([], [])
    assert len(conn.statements) == 1


def test_duplicate_key_on_insert_is_skipped():
    repo, conn = _repo(locked_rows=[5], insert_errors={6: errorcode.ER_DUP_ENTRY})

    attached = repo.attach(relation=Relation.PARENTS, owner_id=1, target_ids=[5, 6, 7])

    assert attached == [7]
    # 5 is already linked under the lock so only 6 and 7 are tried
    assert [params for sql, params in conn.statements if sql.startswith("INSERT")] == [(1, 6), (1, 7)]
    assert conn.committed
    assert not conn.rolled_back


def test_foreign_key_failure_rolls_back():
    repo, conn = _repo(locked_rows=[], insert_errors={9: errorcode.ER_NO_REFERENCED_ROW_2})

    with pytest.raises(StorageError):
        repo.replace(relation=Relation.SUBJECTS, owner_id=3, target_ids=[1, 9])

    assert conn.rolled_back
    assert not conn.committed
