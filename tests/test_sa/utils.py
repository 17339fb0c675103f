# tests/test_sa/utils.py
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Dict, Any
from sqlalchemy import inspect, text
from sqlalchemy.orm import Session


class DBInspector:
    def __init__(self, session: Session):
        self.session = session
        self.engine = session.get_bind()
        self.inspector = inspect(self.engine)

    def get_table_info(self, table_name: str) -> Dict[str, Any]:
        """Get detailed information about a specific table"""
        return {
            'columns': self.inspector.get_columns(table_name),
            'primary_key': self.inspector.get_pk_constraint(table_name),
            'foreign_keys': self.inspector.get_foreign_keys(table_name),
            'indexes': self.inspector.get_indexes(table_name),
            'unique_constraints': self.inspector.get_unique_constraints(table_name)
        }

    def get_all_tables(self) -> List[str]:
        """Get list of all tables in database"""
        return self.inspector.get_table_names()

    def count_rows(self, table_name: str) -> int:
        """Get row count for a table"""
        result = self.session.execute(text(f"SELECT COUNT(*) FROM {table_name}"))
        return result.scalar()

    def unique_column_sets(self, table_name: str) -> List[List[str]]:
        """Column lists covered by a unique constraint or unique index"""
        info = self.get_table_info(table_name)
        sets = [uc['column_names'] for uc in info['unique_constraints']]
        sets += [idx['column_names'] for idx in info['indexes'] if idx['unique']]
        return sets


def compare_model_to_db(session: Session, model_class) -> List[str]:
    """Compare SQLAlchemy model to actual database table"""
    differences = []
    inspector = DBInspector(session)
    table_name = model_class.__tablename__
    db_info = inspector.get_table_info(table_name)

    mapper = inspect(model_class)
    model_columns = {c.key: c for c in mapper.columns}
    db_columns = {c['name']: c for c in db_info['columns']}

    for col_name in model_columns:
        if col_name not in db_columns:
            differences.append(f"Column '{col_name}' exists in model but not in database")

    for col_name in db_columns:
        if col_name not in model_columns:
            differences.append(f"Column '{col_name}' exists in database but not in model")

    return differences


def run_concurrently(calls):
    """Run callables on separate threads, released together.

    Returns:
        One (result, exception) tuple per call, in call order
    """
    barrier = threading.Barrier(len(calls))

    def _run(call):
        barrier.wait()
        try:
            return call(), None
        except Exception as e:
            return None, e

    with ThreadPoolExecutor(max_workers=len(calls)) as pool:
        return list(pool.map(_run, calls))
