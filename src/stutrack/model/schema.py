"""Database table definitions.

## Students
Student names, contact details, graduation date, hometown and major.

## Interactions
Dated notes about meetings with a student. Deleting a student deletes all of
the student's interactions.

The MySQL statements are the production schema. The Sqlite statements define
the same tables for local database files and for the test suite.
"""

STUDENT_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS students (
    student_id INT AUTO_INCREMENT PRIMARY KEY,
    first_name VARCHAR(100) NOT NULL,
    last_name VARCHAR(100) NOT NULL,
    phone VARCHAR(20),
    email VARCHAR(255),
    graduation_month VARCHAR(20),
    graduation_year INT,
    hometown VARCHAR(100),
    major VARCHAR(100),
    linkedin_url VARCHAR(255),
    social_media TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    INDEX idx_name (last_name, first_name),
    INDEX idx_grad_year (graduation_year)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""

INTERACTION_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS interactions (
    interaction_id INT AUTO_INCREMENT PRIMARY KEY,
    student_id INT NOT NULL,
    interaction_date DATE NOT NULL,
    interaction_time TIME,
    location VARCHAR(255),
    notes TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (student_id) REFERENCES students(student_id) ON DELETE CASCADE,
    INDEX idx_student (student_id),
    INDEX idx_date (interaction_date)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""

MYSQL_SCHEMA = [STUDENT_TABLE_SCHEMA, INTERACTION_TABLE_SCHEMA]


# Names are compared without regard to case, matching MySQL's default
#   utf8mb4 collation, so the roster sorts the same way on both databases.
SQLITE_STUDENT_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS students (
          student_id INTEGER PRIMARY KEY AUTOINCREMENT,
          first_name TEXT NOT NULL COLLATE NOCASE,
           last_name TEXT NOT NULL COLLATE NOCASE,
               phone TEXT,
               email TEXT,
    graduation_month TEXT,
     graduation_year INTEGER,
            hometown TEXT,
               major TEXT,
        linkedin_url TEXT,
        social_media TEXT,
          created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""

SQLITE_INTERACTION_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS interactions (
      interaction_id INTEGER PRIMARY KEY AUTOINCREMENT,
          student_id INTEGER NOT NULL,
    interaction_date TEXT NOT NULL,
    interaction_time TEXT,
            location TEXT,
               notes TEXT,
          created_at TEXT DEFAULT CURRENT_TIMESTAMP,
      FOREIGN KEY (student_id) REFERENCES students (student_id) ON DELETE CASCADE
);
"""

SQLITE_SCHEMA = [
    SQLITE_STUDENT_TABLE_SCHEMA,
    SQLITE_INTERACTION_TABLE_SCHEMA,
    "CREATE INDEX IF NOT EXISTS idx_name ON students (last_name, first_name);",
    "CREATE INDEX IF NOT EXISTS idx_grad_year ON students (graduation_year);",
    "CREATE INDEX IF NOT EXISTS idx_student ON interactions (student_id);",
    "CREATE INDEX IF NOT EXISTS idx_date ON interactions (interaction_date);",
]

TABLE_NAMES = ["students", "interactions"]
