import sqlite3

db_path = "school.db"

conn = sqlite3.connect(db_path)
cur = conn.cursor()

statements = [
    # Keep only the newest report of each (student, module, academic period)
    """
    DELETE FROM reports
    WHERE id NOT IN (
        SELECT MAX(id) FROM reports GROUP BY student_id, module_id, academic_data_id
    )
    """,
    # Triple uniqueness for databases created before the constraint existed
    "CREATE UNIQUE INDEX IF NOT EXISTS uq_report_student_module_period "
    "ON reports (student_id, module_id, academic_data_id)",
]

for sql in statements:
    try:
        cur.execute(sql)
        print("OK:", " ".join(sql.split()))
    except sqlite3.OperationalError as e:
        # Table missing on a fresh database, nothing to patch
        print("SKIP:", " ".join(sql.split()), "->", e)

conn.commit()
conn.close()
print("Done.")
