from pydantic import BaseModel, ConfigDict


class ProfitMetrics(BaseModel):
    revenue: str
    cost: str
    gross_profit: str
    profit_margin: str
    quotation_count: int

    model_config = ConfigDict(from_attributes=True)


class ClientProfit(BaseModel):
    client_id: int
    client_name: str
    total_revenue: str
    total_cost: str
    gross_profit: str
    profit_margin: str
    quotation_count: int


class CategoryProfit(BaseModel):
    category: str
    revenue: str
    cost: str
    gross_profit: str
    profit_margin: str
    item_count: int


class MonthlyProfit(BaseModel):
    year: int
    month: int
    label: str
    revenue: str
    cost: str
    gross_profit: str
    profit_margin: str


class LowMarginAlert(BaseModel):
    quotation_id: int
    quotation_number: str
    project_title: str
    status: str
    revenue: str
    profit_margin: str
    severity: str


class ProfitReport(BaseModel):
    as_of: str
    currency: str | None = "INR"
    overall: ProfitMetrics
    by_client: list[ClientProfit]
    by_category: list[CategoryProfit]
    monthly_trend: list[MonthlyProfit]
    low_margin_alerts: list[LowMarginAlert]


class DashboardSummary(BaseModel):
    as_of: str
    currency: str | None = "INR"
    quotation_count: int
    status_counts: dict
    client_count: int
    item_count: int
    accepted_revenue: str
    pipeline_value: str
