"""Tests for JSON extraction from free-text model output."""

from cvhjelper.utils.parser import extract_json, parse_evaluation_response


class TestExtractJson:
    """Tests for extract_json."""

    def test_clean_json(self):
        assert extract_json('{"score": 7}') == {"score": 7}

    def test_fenced_json(self):
        text = 'Here is the evaluation:\n```json\n{"score": 7, "notes": ["a"]}\n```\nThanks'
        assert extract_json(text) == {"score": 7, "notes": ["a"]}

    def test_unlabelled_fence(self):
        assert extract_json('```\n{"a": 1}\n```') == {"a": 1}

    def test_json_embedded_in_prose(self):
        text = 'The result is {"summary": "Uses {braces} in text", "rating": 6} as requested.'
        assert extract_json(text) == {"summary": "Uses {braces} in text", "rating": 6}

    def test_prefers_array_when_asked(self):
        text = 'Projects: [{"name": "A"}, {"name": "B"}]'
        assert extract_json(text, expect_array=True) == [{"name": "A"}, {"name": "B"}]

    def test_falls_back_to_other_shape(self):
        assert extract_json('[1, 2, 3]') == [1, 2, 3]

    def test_no_json(self):
        assert extract_json("No structured content here") is None
        assert extract_json("") is None
        assert extract_json("   ") is None

    def test_truncated_json(self):
        assert extract_json('{"score": 7, "reasoning": "cut off') is None


class TestParseEvaluationResponse:
    """Tests for parse_evaluation_response."""

    def test_full_evaluation(self):
        text = """```json
{
  "overall_rating": 7.5,
  "summary": "Solid CV",
  "key_strengths": ["Clear structure"],
  "key_improvement_areas": ["Quantify results"],
  "criterion_ratings": [
    {"criterion_id": "summary_quality", "criterion_name": "Summary Quality",
     "rating": 8, "reasoning": "Strong opening", "suggestions": ["Shorten"]}
  ]
}
```"""
        parsed = parse_evaluation_response(text)

        assert parsed["overall_rating"] == 7.5
        assert parsed["summary"] == "Solid CV"
        assert parsed["key_strengths"] == ["Clear structure"]
        assert parsed["criterion_ratings"] == [
            {
                "criterion_id": "summary_quality",
                "criterion_name": "Summary Quality",
                "rating": 8.0,
                "reasoning": "Strong opening",
                "suggestions": ["Shorten"],
            }
        ]

    def test_alternate_keys_are_normalized(self):
        text = """{"evaluation": {
            "score": "6/10",
            "strengths": "Good layout",
            "weaknesses": ["Long"],
            "criteria": [{"name": "Skills Presentation", "score": "5", "comment": "Thin"}]
        }}"""
        parsed = parse_evaluation_response(text)

        assert parsed["overall_rating"] == 6.0
        assert parsed["key_strengths"] == ["Good layout"]
        assert parsed["key_improvement_areas"] == ["Long"]
        rating = parsed["criterion_ratings"][0]
        assert rating["criterion_id"] == "skills_presentation"
        assert rating["rating"] == 5.0
        assert rating["reasoning"] == "Thin"

    def test_missing_rating_is_none(self):
        parsed = parse_evaluation_response('{"summary": "x", "criterion_ratings": [{"name": "A"}]}')
        assert parsed["overall_rating"] is None
        assert parsed["criterion_ratings"][0]["rating"] is None

    def test_plain_text_is_not_parsed(self):
        assert parse_evaluation_response("## Summary\nThe CV is decent.") is None

    def test_ratings_must_be_a_list(self):
        assert parse_evaluation_response('{"summary": "x", "criterion_ratings": "none"}') is None
