from tools.report_tools.generate_report import classify_section, render_report, split_report_sections

REPORT = """# Cold Chain Operations Report
Generated for ops@example.com

## Executive Summary
All warehouses nominal.

## Alert & Risk Analysis
- 2 temperature excursions
### Details
Sensor s1 spiked.

## Action Plan
1. Recalibrate s1
"""


def test_classify_section_by_keyword():
    assert classify_section("Executive Summary") == ("executive", "█")
    assert classify_section("Inventory Status") == ("inventory", "◆")
    assert classify_section("Key Performance Metrics") == ("performance", "◈")
    assert classify_section("Closing words") == ("general", "•")


def test_split_report_sections():
    parsed = split_report_sections(REPORT)

    assert parsed["title"] == "Cold Chain Operations Report"
    assert parsed["preamble"] == "Generated for ops@example.com"
    assert [s["heading"] for s in parsed["sections"]] == [
        "Executive Summary", "Alert & Risk Analysis", "Action Plan",
    ]
    risk = parsed["sections"][1]
    assert risk["category"] == "risk"
    # Level-3 headings stay inside their section
    assert "### Details" in risk["body"]


def test_render_report_handles_plain_and_empty_text():
    assert render_report("   ") == "📄 The server returned an empty report."
    assert render_report("just text") == "just text"
    rendered = render_report(REPORT)
    assert rendered.startswith("📊 **Cold Chain Operations Report**")
    assert "→ **Action Plan** [action]" in rendered
