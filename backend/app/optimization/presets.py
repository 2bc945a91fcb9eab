"""
Default restaurant problem: objectives, decision variables and constraints
Used when a caller does not supply its own
"""

from typing import List, Optional

from app.optimization.models import (
    BusinessBaseline,
    Constraint,
    Impact,
    Objective,
    ObjectiveBounds,
    Variable
)
from app.optimization.constraints import threshold_constraint


def default_objectives(baseline: Optional[BusinessBaseline] = None) -> List[Objective]:
    """Profit, costs, customers, margin and quality objectives (weights sum to 100)"""
    baseline = baseline or BusinessBaseline()
    profit = baseline.revenue - baseline.costs
    margin = (profit / baseline.revenue) * 100 if baseline.revenue else 0.0

    return [
        Objective(
            id='profit', name='Maximize Profit', type='maximize', weight=35,
            current=profit, unit='$', constraints=ObjectiveBounds(min=20000, max=100000)
        ),
        Objective(
            id='costs', name='Minimize Costs', type='minimize', weight=25,
            current=baseline.costs, unit='$', constraints=ObjectiveBounds(min=50000, max=120000)
        ),
        Objective(
            id='customers', name='Maximize Customers', type='maximize', weight=20,
            current=baseline.customers, unit='#', constraints=ObjectiveBounds(min=2000, max=5000)
        ),
        Objective(
            id='margin', name='Target Margin 25%', type='target', target=25, weight=10,
            current=margin, unit='%', constraints=ObjectiveBounds(min=10, max=40)
        ),
        Objective(
            id='quality', name='Maintain Quality', type='target', target=90, weight=10,
            current=baseline.quality, unit='pts', constraints=ObjectiveBounds(min=70, max=100)
        ),
    ]


def default_variables(average_ticket: float = 42) -> List[Variable]:
    """Price, staffing, marketing, inventory and menu levers"""
    return [
        Variable(
            id='price', name='Average Price', current_value=average_ticket,
            min_value=min(35, average_ticket), max_value=max(55, average_ticket), step_size=1, unit='$',
            impact=Impact(revenue=0.8, cost=0.1, quality=-0.2, customers=-0.3)
        ),
        Variable(
            id='staff', name='Staff (FTE)', current_value=15,
            min_value=10, max_value=25, step_size=1, unit='',
            impact=Impact(revenue=0.3, cost=0.6, quality=0.4, customers=0.2)
        ),
        Variable(
            id='marketing', name='Marketing Spend', current_value=5000,
            min_value=2000, max_value=15000, step_size=500, unit='$',
            impact=Impact(revenue=0.5, cost=0.3, quality=0.1, customers=0.7)
        ),
        Variable(
            id='inventory', name='Inventory Days', current_value=7,
            min_value=3, max_value=14, step_size=1, unit=' days',
            impact=Impact(revenue=-0.1, cost=-0.4, quality=0.2, customers=0.1)
        ),
        Variable(
            id='menu', name='Menu Items', current_value=45,
            min_value=30, max_value=70, step_size=5, unit='',
            impact=Impact(revenue=0.2, cost=0.3, quality=-0.1, customers=0.4)
        ),
    ]


def default_constraints() -> List[Constraint]:
    """Monthly cost budget and minimum service quality"""
    return [
        threshold_constraint('budget', 'Monthly cost budget', 'budget', limit=100000),
        threshold_constraint('min_quality', 'Minimum quality', 'quality', limit=75),
    ]
