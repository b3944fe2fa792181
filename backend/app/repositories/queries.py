"""
Raw SQL for aggregate reads that are simpler as one statement.
Portable across Postgres and SQLite; use with parameter binding.
"""

# ---------------------------------------------------------------------------
# 1) Preference counts: total, liked (score > 0), disliked (score < 0)
# ---------------------------------------------------------------------------
SQL_PREFERENCE_COUNTS = """
SELECT
    COUNT(*) AS total_features,
    COALESCE(SUM(CASE WHEN score > 0 THEN 1 ELSE 0 END), 0) AS liked_features,
    COALESCE(SUM(CASE WHEN score < 0 THEN 1 ELSE 0 END), 0) AS disliked_features
FROM preference_entries;
"""

# ---------------------------------------------------------------------------
# 2) Strongest entries in one direction. Ties broken by sample_count so that
#    better-supported preferences come first.
# ---------------------------------------------------------------------------
SQL_TOP_LIKED = """
SELECT attribute_key, attribute_value, score, sample_count
FROM preference_entries
WHERE score > 0
ORDER BY score DESC, sample_count DESC
LIMIT :limit;
"""

SQL_TOP_DISLIKED = """
SELECT attribute_key, attribute_value, score, sample_count
FROM preference_entries
WHERE score < 0
ORDER BY score ASC, sample_count DESC
LIMIT :limit;
"""
