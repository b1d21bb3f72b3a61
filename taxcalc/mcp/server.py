"""Tax Calc MCP Server - FastMCP implementation for tax calculation tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from taxcalc.sdk import (
    TaxCalcError,
    available_tax_years,
    calculate_tax_estimate,
    calculate_withholding,
    latest_tax_year,
    to_json_dict,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("tax-calc")


# --- Tools ---

@mcp.tool()
async def withholding(
    profile: dict = Field(description=(
        "W-4 elections: filing_status (single, married_jointly, married_separately, "
        "head_of_household), multiple_jobs, claim_dependents, other_income, deductions, "
        "extra_withholding"
    )),
    income: dict = Field(description=(
        "Income: salary (annual), pay_frequency (weekly, biweekly, semimonthly, monthly, "
        "quarterly, annually), plus optional pre_tax_deductions, retirement_401k, "
        "traditional_ira, hsa, fsa"
    )),
    tax_year: int | None = Field(default=None, description="Tax year (default: latest available)"),
) -> dict[str, Any]:
    """Calculate federal income tax, Social Security and Medicare withholding for one pay period."""
    try:
        result = calculate_withholding(profile, income, tax_year=tax_year)
        return to_json_dict(result)
    except TaxCalcError as e:
        return {"error": str(e)}
    except Exception as e:
        logger.error(f"Error calculating withholding: {e}")
        return {"error": str(e)}


@mcp.tool()
async def estimate_taxes(
    income: dict = Field(description="Annual income: salary, pay_frequency, self_employment_income, investment_income, other_income, pre-tax contributions"),
    filing_status: str = Field(description="single, married_jointly, married_separately or head_of_household"),
    deductions: dict | None = Field(default=None, description="use_standard_deduction (default true) or itemized amounts"),
    credits: dict | None = Field(default=None, description="child_tax_credit, child_and_dependent_care, education_credits, energy_credits, other_credits"),
    tax_year: int | None = Field(default=None, description="Tax year (default: latest available)"),
    withholding_to_date: float = Field(default=0, description="Federal tax withheld so far"),
) -> dict[str, Any]:
    """Estimate annual federal tax liability and the refund (positive) or amount owed (negative)."""
    try:
        result = calculate_tax_estimate(
            income=income,
            deductions=deductions or {"use_standard_deduction": True},
            credits=credits or {},
            filing_status=filing_status,
            tax_year=tax_year or latest_tax_year(),
            withholding_to_date=withholding_to_date,
        )
        return to_json_dict(result)
    except TaxCalcError as e:
        return {"error": str(e)}
    except Exception as e:
        logger.error(f"Error estimating taxes: {e}")
        return {"error": str(e)}


@mcp.tool()
async def list_tax_years() -> dict[str, Any]:
    """List the tax years that have bracket tables and constants available."""
    return {"years": available_tax_years()}


# --- Resources ---

@mcp.resource("taxcalc://rules/years")
async def list_years_resource() -> str:
    """List available tax years."""
    return json.dumps({"years": available_tax_years()}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
