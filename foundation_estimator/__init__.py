"""Foundation Estimator - concrete foundation proposal estimating.

This package contains the estimating core for concrete foundation
contractors: it infers concrete volume and rebar quantities from line item
descriptions and computes job costing and margin for proposals.

Architecture:
- models: LineItem, Proposal, CatalogItem, PriceHistoryRecord
- services: volume engine, rebar calculator, aggregator, costing
- validators: record boundary parsing for persisted proposals
"""

__version__ = "1.0.0"
