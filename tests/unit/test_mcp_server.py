"""Tests for the MCP tool functions.

Tools are called directly; every argument is passed explicitly because the
defaults are pydantic Field descriptors.
"""

import asyncio
import json

import pytest

pytest.importorskip("mcp")

from taxcalc.mcp import server  # noqa: E402


def test_withholding_tool(toy_rules):
    result = asyncio.run(server.withholding(
        profile={"filingStatus": "single"},
        income={"salary": 60000, "payFrequency": "monthly"},
        tax_year=toy_rules["year"],
    ))

    assert result["federal_withholding"] == 708.96
    assert result["filing_status"] == "single"


def test_withholding_tool_reports_invalid_input():
    result = asyncio.run(server.withholding(
        profile={"filing_status": "single"},
        income={"salary": -1, "pay_frequency": "monthly"},
        tax_year=None,
    ))

    assert "income.salary" in result["error"]


def test_estimate_tool(toy_rules):
    result = asyncio.run(server.estimate_taxes(
        income={"salary": 80000, "pay_frequency": "annually"},
        filing_status="single",
        deductions=None,
        credits={"other_credits": 195.5},
        tax_year=toy_rules["year"],
        withholding_to_date=10200,
    ))

    assert result["total_tax_liability"] == 9500.0
    assert result["estimated_refund_or_owed"] == 700.0


def test_estimate_tool_unsupported_year():
    result = asyncio.run(server.estimate_taxes(
        income={"salary": 80000, "pay_frequency": "annually"},
        filing_status="single",
        deductions=None,
        credits=None,
        tax_year=1999,
        withholding_to_date=0,
    ))

    assert "No tax rules for year 1999" in result["error"]


def test_list_tax_years(toy_rules):
    result = asyncio.run(server.list_tax_years())

    assert 2024 in result["years"]
    assert toy_rules["year"] in result["years"]


def test_years_resource():
    data = json.loads(asyncio.run(server.list_years_resource()))

    assert 2025 in data["years"]
