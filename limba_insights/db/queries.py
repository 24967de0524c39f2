"""
Centralized SQL Queries for the telemetry listings.

Each listing is a single parameterized statement. Optional filters use
the `(:param IS NULL OR column = :param)` form so no SQL is assembled at
runtime; pass None to disable a filter.

Usage:
    from limba_insights.db.queries import QUERIES

    result = session.execute(text(QUERIES["error_patterns"]), params)
"""

from __future__ import annotations

# =============================================================================
# USAGE
# =============================================================================

GET_TTS_USAGE = """
    SELECT
        DATE(date) AS usage_date,
        SUM(characters_used) AS total_characters
    FROM tts_usage
    WHERE date >= NOW() - INTERVAL '1 day' * :days
    GROUP BY DATE(date)
    ORDER BY usage_date DESC
"""

# =============================================================================
# LEARNER DATA (anonymized: no user ids selected)
# =============================================================================

GET_SESSION_SUMMARY = """
    SELECT
        session_type,
        COUNT(*) AS session_count,
        ROUND(AVG(duration_seconds)) AS avg_duration_sec,
        ROUND(AVG(EXTRACT(EPOCH FROM (ended_at - started_at)))) AS avg_wall_time_sec,
        MIN(started_at) AS earliest,
        MAX(started_at) AS latest
    FROM sessions
    GROUP BY session_type
    ORDER BY session_count DESC
"""

GET_SESSION_CONTENT_BREAKDOWN = """
    SELECT
        session_type,
        content_id,
        COUNT(*) AS session_count,
        ROUND(AVG(duration_seconds)) AS avg_duration_sec
    FROM sessions
    WHERE session_type = :session_type
    GROUP BY session_type, content_id
    ORDER BY session_count DESC
    LIMIT :limit
"""

GET_PROFICIENCY_TRENDS = """
    SELECT
        id, overall_score, listening_score, reading_score,
        speaking_score, writing_score, recorded_at
    FROM proficiency_history
    ORDER BY recorded_at DESC
    LIMIT :limit
"""

GET_FEATURE_EXPOSURE = """
    SELECT
        feature_key,
        exposure_type,
        COUNT(*) AS total_exposures,
        SUM(CASE WHEN is_correct THEN 1 ELSE 0 END) AS correct_count,
        ROUND(100.0 * SUM(CASE WHEN is_correct THEN 1 ELSE 0 END) / NULLIF(COUNT(*), 0), 1) AS accuracy_pct
    FROM user_feature_exposure
    WHERE (:feature_key IS NULL OR feature_key = :feature_key)
    GROUP BY feature_key, exposure_type
    ORDER BY total_exposures DESC
    LIMIT :limit
"""

GET_MYSTERY_ITEMS = """
    SELECT
        id, word, context_sentence, definition, examples,
        grammar_info, is_explored, created_at
    FROM mystery_items
    WHERE (:explored IS NULL OR is_explored = :explored)
    ORDER BY created_at DESC
    LIMIT :limit
"""

GET_GENERATED_CONTENT_SUMMARY = """
    SELECT
        content_type,
        target_error_type,
        target_category,
        COUNT(*) AS generated_count,
        SUM(CASE WHEN is_listened THEN 1 ELSE 0 END) AS listened_count,
        ROUND(100.0 * SUM(CASE WHEN is_listened THEN 1 ELSE 0 END) / NULLIF(COUNT(*), 0), 1) AS listen_rate_pct,
        SUM(audio_estimated_cost) AS total_tts_cost,
        SUM(audio_character_count) AS total_characters
    FROM generated_content
    WHERE (:content_type IS NULL OR content_type = :content_type)
    GROUP BY content_type, target_error_type, target_category
    ORDER BY generated_count DESC
    LIMIT :limit
"""

GET_LEARNING_NARRATIVES = """
    SELECT id, narrative_text, stats, created_at
    FROM learning_narratives
    ORDER BY created_at DESC
    LIMIT :limit
"""

# =============================================================================
# ERRORS & ADAPTATION
# =============================================================================

GET_ERROR_PATTERNS = """
    SELECT error_type, category, COUNT(*) AS frequency, modality
    FROM error_logs
    WHERE (:error_type IS NULL OR error_type = :error_type)
    GROUP BY error_type, category, modality
    ORDER BY frequency DESC
    LIMIT :limit
"""

GET_ADAPTATION_SUMMARY = """
    SELECT
        pattern_key,
        error_type,
        category,
        MAX(tier) AS max_tier_reached,
        COUNT(*) AS total_interventions,
        SUM(CASE WHEN is_resolved THEN 1 ELSE 0 END) AS resolved_count
    FROM adaptation_interventions
    GROUP BY pattern_key, error_type, category
    ORDER BY max_tier_reached DESC, total_interventions DESC
    LIMIT 25
"""

# =============================================================================
# EXERCISES
# =============================================================================

GET_READING_QUESTIONS = """
    SELECT * FROM reading_questions
    WHERE is_active = true
      AND (:level IS NULL OR level = :level)
    ORDER BY sort_order
    LIMIT :limit
"""

GET_STRESS_PAIRS = """
    SELECT * FROM stress_minimal_pairs
    ORDER BY created_at DESC
    LIMIT :limit
"""

GET_SUGGESTED_QUESTIONS = """
    SELECT * FROM suggested_questions
    WHERE is_active = true
      AND (:cefr_level IS NULL OR cefr_level = :cefr_level)
      AND (:category IS NULL OR category = :category)
    ORDER BY sort_order
    LIMIT :limit
"""

GET_TUTOR_OPENINGS = """
    SELECT * FROM tutor_opening_messages
    WHERE is_active = true
      AND (:self_assessment_key IS NULL OR self_assessment_key = :self_assessment_key)
"""

# =============================================================================
# SCHEMA
# =============================================================================

GET_PUBLIC_COLUMNS = """
    SELECT table_name, column_name, data_type
    FROM information_schema.columns
    WHERE table_schema = 'public'
    ORDER BY table_name, ordinal_position
"""

# =============================================================================
# QUERY REGISTRY
# =============================================================================

QUERIES = {
    "tts_usage": GET_TTS_USAGE,
    "session_summary": GET_SESSION_SUMMARY,
    "session_content_breakdown": GET_SESSION_CONTENT_BREAKDOWN,
    "proficiency_trends": GET_PROFICIENCY_TRENDS,
    "feature_exposure": GET_FEATURE_EXPOSURE,
    "mystery_items": GET_MYSTERY_ITEMS,
    "generated_content_summary": GET_GENERATED_CONTENT_SUMMARY,
    "learning_narratives": GET_LEARNING_NARRATIVES,
    "error_patterns": GET_ERROR_PATTERNS,
    "adaptation_summary": GET_ADAPTATION_SUMMARY,
    "reading_questions": GET_READING_QUESTIONS,
    "stress_pairs": GET_STRESS_PAIRS,
    "suggested_questions": GET_SUGGESTED_QUESTIONS,
    "tutor_openings": GET_TUTOR_OPENINGS,
    "public_columns": GET_PUBLIC_COLUMNS,
}
