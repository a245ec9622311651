"""Database schema for the student roster (Azure SQL).

Tables:
    Students: one row per student name, with the current roll number
"""

# Target table and the columns this function reads and writes
STUDENTS_TABLE = "Students"
NAME_COLUMN = "Name"
ROLL_NO_COLUMN = "roll_no"

# Column that must exist before any row is written
REQUIRED_COLUMN = ROLL_NO_COLUMN

# SQL Server INT range for roll_no
ROLL_NO_MIN = -(2**31)
ROLL_NO_MAX = 2**31 - 1

# Schema lookup used to validate the target table before writing
COLUMN_EXISTS_SQL = """
SELECT COLUMN_NAME
FROM INFORMATION_SCHEMA.COLUMNS
WHERE TABLE_NAME = ? AND COLUMN_NAME = ?
"""

# Upsert keyed on Name: update roll_no when matched, insert otherwise
MERGE_STUDENT_SQL = f"""
MERGE INTO {STUDENTS_TABLE} AS target
USING (SELECT ? AS {NAME_COLUMN}, ? AS {ROLL_NO_COLUMN}) AS source
ON target.{NAME_COLUMN} = source.{NAME_COLUMN}
WHEN MATCHED THEN
    UPDATE SET target.{ROLL_NO_COLUMN} = source.{ROLL_NO_COLUMN}
WHEN NOT MATCHED THEN
    INSERT ({NAME_COLUMN}, {ROLL_NO_COLUMN}) VALUES (source.{NAME_COLUMN}, source.{ROLL_NO_COLUMN});
"""

# SQL Schema for local and test databases
SCHEMA_SQL = f"""
CREATE TABLE {STUDENTS_TABLE} (
    {NAME_COLUMN} NVARCHAR(255) NOT NULL,
    {ROLL_NO_COLUMN} INT NULL,
    CONSTRAINT PK_{STUDENTS_TABLE}_{NAME_COLUMN} PRIMARY KEY ({NAME_COLUMN})
);
"""

# Drop the table (for clean reset during development)
DROP_SCHEMA_SQL = f"""
IF OBJECT_ID('dbo.{STUDENTS_TABLE}', 'U') IS NOT NULL DROP TABLE {STUDENTS_TABLE};
"""

# Check if schema exists
CHECK_SCHEMA_SQL = f"""
SELECT COUNT(*)
FROM INFORMATION_SCHEMA.TABLES
WHERE TABLE_SCHEMA = 'dbo'
  AND TABLE_NAME = '{STUDENTS_TABLE}';
"""
