"""Tests for comment templates."""

import json

import pytest

from prgate_comments.templates import build_comment, identifier_for
from prgate_core.errors import ValidationError


class TestIdentifiers:
    def test_each_type_has_distinct_identifier(self):
        ids = {identifier_for(t) for t in ("coverage", "e2e", "build")}
        assert ids == {"test-coverage", "e2e-tests", "build-lint"}

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError, match="--type"):
            identifier_for("deploy")


class TestCoverageComment:
    def test_includes_global_and_details(self):
        rendered = build_comment("coverage", global_coverage="85.50", coverage_details="#### details here")
        assert rendered.identifier == "test-coverage"
        assert "will be **85.50%**" in rendered.body
        assert "#### details here" in rendered.body
        assert "requires 20% coverage" in rendered.body

    def test_missing_values_render_placeholders(self):
        rendered = build_comment("coverage")
        assert "**N/A**" in rendered.body
        assert "No coverage details available" in rendered.body

    def test_not_applicable_global_has_no_percent_sign(self):
        assert "**N/A**" in build_comment("coverage", global_coverage="N/A").body

    def test_threshold_in_note(self):
        assert "requires 72.5% coverage" in build_comment("coverage", threshold=72.5).body


class TestStatusComments:
    def test_build_success(self):
        rendered = build_comment("build")
        assert rendered.identifier == "build-lint"
        assert "**Status:** ✅ Success" in rendered.body
        assert "Build and linting completed successfully!" in rendered.body

    def test_build_failure_with_details(self):
        details = json.dumps({"buildDetails": "TypeScript compilation failed"})
        rendered = build_comment("build", status="failure", details=details)
        assert "**Status:** ❌ Failed" in rendered.body
        assert "TypeScript compilation failed" in rendered.body

    def test_e2e_warning(self):
        assert "**Status:** ⚠️ Warning" in build_comment("e2e", status="warning").body

    def test_e2e_failure_mentions_artifacts(self):
        body = build_comment("e2e", status="failure").body
        assert "Test artifacts available" in body

    def test_e2e_success_omits_artifacts(self):
        assert "Test artifacts" not in build_comment("e2e").body

    def test_environment_rendered_in_order(self):
        details = json.dumps({"environment": {"Browser": "Chromium", "Database": "PostgreSQL"}})
        body = build_comment("e2e", details=details).body
        assert "### Test Environment\n- **Browser:** Chromium\n- **Database:** PostgreSQL" in body


class TestOverrides:
    def test_title_replaces_heading_but_not_identifier(self):
        rendered = build_comment("build", title="Nightly build")
        assert rendered.body.startswith("## Nightly build\n")
        assert rendered.identifier == "build-lint"

    def test_body_replaces_template(self):
        rendered = build_comment("e2e", body="custom text")
        assert rendered.body == "custom text"
        assert rendered.identifier == "e2e-tests"


class TestValidation:
    def test_invalid_details_json(self):
        with pytest.raises(ValidationError, match="not valid JSON"):
            build_comment("build", details="{oops")

    def test_details_must_be_object(self):
        with pytest.raises(ValidationError, match="JSON object"):
            build_comment("build", details="[1, 2]")

    def test_environment_must_be_object(self):
        with pytest.raises(ValidationError):
            build_comment("e2e", details=json.dumps({"environment": ["a"]}))

    def test_unknown_status(self):
        with pytest.raises(ValidationError, match="--status"):
            build_comment("build", status="flaky")
