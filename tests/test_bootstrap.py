from werkwise.database.bootstrap import split_sql_script


def test_split_skips_database_lines_and_comments():
    sql = """
-- Werkwise schema
CREATE DATABASE IF NOT EXISTS werkwise CHARACTER SET utf8mb4;
USE werkwise;

CREATE TABLE system_settings (
    id INT PRIMARY KEY,
    csv_separator VARCHAR(1) NOT NULL DEFAULT ';'
);
INSERT INTO system_settings (id) VALUES (1);
"""
    statements = list(split_sql_script(sql))

    assert len(statements) == 2
    assert statements[0].startswith("CREATE TABLE system_settings")
    assert "DEFAULT ';'" in statements[0]
    assert statements[1] == "INSERT INTO system_settings (id) VALUES (1)"


def test_split_keeps_unterminated_tail():
    assert list(split_sql_script("SELECT 1; SELECT 'a;b'")) == ["SELECT 1", "SELECT 'a;b'"]
