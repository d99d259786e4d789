"""Tests for format negotiation."""

from enum import Enum

import pytest

from viewforge import View
from viewforge.exceptions import MissingFormatError
from viewforge.negotiation import is_format_variant, negotiate, require_format


class Format(Enum):
    HTML = "html"


class Report(View):
    pass


class JsonReport(Report):
    format = "json"


class CompactJsonReport(JsonReport):
    format = "json"


class CsvReport(Report):
    format = "csv"


class PrintableReport(Report):
    pass


class PdfReport(PrintableReport):
    format = "pdf"


class XmlExport(Report):
    format = "xml"
    template = "exports/report"


class TestRequireFormat:
    """Tests for require_format."""

    def test_returns_format(self):
        assert require_format("html") == "html"
        assert require_format(" json ") == "json"

    def test_unwraps_enum_values(self):
        assert require_format(Format.HTML) == "html"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_format_raises(self, value):
        with pytest.raises(MissingFormatError):
            require_format(value)


class TestNegotiate:
    """Tests for negotiate."""

    def test_view_without_handler_renders_itself(self):
        assert negotiate(Report, "html") is Report
        assert negotiate(Report, "png") is Report

    def test_picks_subclass_declaring_format(self):
        assert negotiate(Report, "csv") is CsvReport

    def test_most_specific_handler_wins(self):
        """Test deeper descendants declaring the same format are preferred."""
        assert negotiate(Report, "json") is CompactJsonReport

    def test_does_not_enter_subclasses_with_their_own_template(self):
        """Test a format handler below an unrelated subclass is not picked for the base view."""
        assert negotiate(Report, "pdf") is Report
        assert negotiate(PrintableReport, "pdf") is PdfReport

    def test_handler_with_explicit_template_is_not_a_variant(self):
        assert negotiate(Report, "xml") is Report
        assert negotiate(XmlExport, "xml") is XmlExport

    def test_is_format_variant(self):
        assert is_format_variant(JsonReport, Report)
        assert is_format_variant(CompactJsonReport, JsonReport)
        assert not is_format_variant(PrintableReport, Report)
        assert not is_format_variant(XmlExport, Report)

    def test_view_declaring_the_format_is_used_directly(self):
        assert negotiate(JsonReport, "json") is JsonReport

    def test_handler_classes_are_tracked_on_parents(self):
        assert Report._format_handlers == [JsonReport, CsvReport, PrintableReport, XmlExport]
        assert JsonReport._format_handlers == [CompactJsonReport]
