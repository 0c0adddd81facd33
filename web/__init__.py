"""Web API for the market study valuation engine."""
