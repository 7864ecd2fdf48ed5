import os, sqlite3
from contextlib import closing

SCHEMA = """
CREATE TABLE IF NOT EXISTS users(
    user_id INTEGER PRIMARY KEY,
    target_id INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
"""

def init_db(db_path: str):
    d = os.path.dirname(db_path)
    if d:
        os.makedirs(d, exist_ok=True)
    with closing(sqlite3.connect(db_path)) as con:
        # базовые PRAGMA
        try:
            con.execute("PRAGMA journal_mode=WAL")
        except sqlite3.DatabaseError:
            pass
        con.executescript(SCHEMA)
        con.commit()

def execute(db_path: str, sql: str, params: tuple = ()):
    with closing(sqlite3.connect(db_path)) as con:
        cur = con.execute(sql, params)
        con.commit()
        return cur

def fetchone(db_path: str, sql: str, params: tuple = ()):
    with closing(sqlite3.connect(db_path)) as con:
        cur = con.execute(sql, params)
        return cur.fetchone()

def fetchall(db_path: str, sql: str, params: tuple = ()):
    with closing(sqlite3.connect(db_path)) as con:
        cur = con.execute(sql, params)
        return cur.fetchall()
