from contextlib import contextmanager
import threading
from psycopg2.pool import ThreadedConnectionPool
from psycopg2.extras import RealDictCursor
from typing import List, Dict, Any, Optional
from config import DB_POOL_MIN, DB_POOL_MAX
from models import CandidateIn, FRESHER
import logging

logger = logging.getLogger(__name__)

CREATE_CANDIDATES_TABLE = """
    CREATE TABLE IF NOT EXISTS candidates (
        id SERIAL PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        specialization VARCHAR(255) NOT NULL,
        location VARCHAR(255) NOT NULL,
        years_experience VARCHAR(50) NOT NULL,
        remark TEXT,
        resume_url TEXT NOT NULL DEFAULT '',
        employee_referral BOOLEAN DEFAULT FALSE,
        employee_id VARCHAR(255),
        consultancy_referral BOOLEAN DEFAULT FALSE,
        consultancy_name VARCHAR(255)
    )
"""


class Database:
    """Storage handle for the candidates table, backed by a psycopg2 connection pool"""

    def __init__(self, dsn: str, minconn: int = DB_POOL_MIN, maxconn: int = DB_POOL_MAX):
        if not dsn:
            raise ValueError("DATABASE_URL is not configured")
        self.pool = ThreadedConnectionPool(minconn, maxconn, dsn, cursor_factory=RealDictCursor)
        # getconn raises PoolError when exhausted; callers wait for a free slot instead
        self._slots = threading.BoundedSemaphore(maxconn)
        logger.info(f"Connection pool ready ({minconn}-{maxconn} connections)")

    @contextmanager
    def cursor(self):
        """Check out a pooled connection and yield a cursor inside one transaction"""
        with self._slots:
            conn = self.pool.getconn()
            try:
                with conn.cursor() as cursor:
                    yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self.pool.putconn(conn)

    def close(self):
        self.pool.closeall()
        logger.info("Connection pool closed")

    def init_database(self):
        """Create the candidates table if it does not exist"""
        with self.cursor() as cursor:
            cursor.execute(CREATE_CANDIDATES_TABLE)
        logger.info("✅ candidates table created (if not existed)")

    def create_candidate(self, candidate: CandidateIn, resume_url: str = "") -> Dict[str, Any]:
        try:
            with self.cursor() as cursor:
                cursor.execute("""
                    INSERT INTO candidates
                        (name, specialization, location, years_experience, remark, resume_url,
                         employee_referral, employee_id, consultancy_referral, consultancy_name)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING *
                """, (
                    candidate.name,
                    candidate.specialization,
                    candidate.location,
                    candidate.years_experience,
                    candidate.remark,
                    resume_url,
                    candidate.employee_referral,
                    candidate.employee_id,
                    candidate.consultancy_referral,
                    candidate.consultancy_name,
                ))
                result = cursor.fetchone()
            logger.info(f"Candidate {candidate.name} saved with id {result['id']}")
            return dict(result)
        except Exception:
            logger.exception(f"Error saving candidate {candidate.name}")
            raise

    def list_candidates(self) -> List[Dict[str, Any]]:
        try:
            with self.cursor() as cursor:
                cursor.execute("SELECT * FROM candidates ORDER BY id")
                return [dict(row) for row in cursor.fetchall()]
        except Exception:
            logger.exception("Error fetching candidates")
            raise

    def update_candidate(self, candidate_id: int, candidate: CandidateIn) -> Optional[Dict[str, Any]]:
        """Replace every editable field; returns None when the id is unknown"""
        try:
            with self.cursor() as cursor:
                cursor.execute("""
                    UPDATE candidates SET
                        name = %s,
                        specialization = %s,
                        location = %s,
                        years_experience = %s,
                        remark = %s,
                        employee_referral = %s,
                        employee_id = %s,
                        consultancy_referral = %s,
                        consultancy_name = %s
                    WHERE id = %s
                    RETURNING *
                """, (
                    candidate.name,
                    candidate.specialization,
                    candidate.location,
                    candidate.years_experience,
                    candidate.remark,
                    candidate.employee_referral,
                    candidate.employee_id,
                    candidate.consultancy_referral,
                    candidate.consultancy_name,
                    candidate_id,
                ))
                result = cursor.fetchone()
        except Exception:
            logger.exception(f"Error updating candidate {candidate_id}")
            raise

        if result is None:
            return None
        logger.info(f"Candidate {candidate_id} updated")
        return dict(result)

    def delete_candidate(self, candidate_id: int) -> bool:
        try:
            with self.cursor() as cursor:
                cursor.execute("DELETE FROM candidates WHERE id = %s", (candidate_id,))
                deleted = cursor.rowcount > 0
        except Exception:
            logger.exception(f"Error deleting candidate {candidate_id}")
            raise

        if deleted:
            logger.info(f"Candidate {candidate_id} deleted")
        return deleted

    def get_dashboard_stats(self) -> Dict[str, Any]:
        """Tallies over the whole table for the dashboard"""
        try:
            with self.cursor() as cursor:
                cursor.execute("""
                    SELECT
                        COUNT(*) AS total_candidates,
                        COUNT(*) FILTER (WHERE specialization = %s) AS freshers,
                        COUNT(*) FILTER (WHERE employee_referral = true) AS employee_referrals,
                        COUNT(*) FILTER (WHERE consultancy_referral = true) AS consultancy_referrals
                    FROM candidates
                """, (FRESHER,))
                stats = dict(cursor.fetchone())

                cursor.execute("SELECT location, COUNT(*) AS count FROM candidates GROUP BY location")
                stats["candidates_by_location"] = [dict(row) for row in cursor.fetchall()]

                cursor.execute(
                    "SELECT years_experience, COUNT(*) AS count FROM candidates GROUP BY years_experience"
                )
                stats["candidates_by_experience"] = [dict(row) for row in cursor.fetchall()]
        except Exception:
            logger.exception("Error computing dashboard stats")
            raise

        stats["experienced"] = stats["total_candidates"] - stats["freshers"]
        return stats
