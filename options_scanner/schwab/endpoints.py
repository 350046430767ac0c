"""
Schwab API endpoint definitions.

Documentation: https://developer.schwab.com/products/trader-api--individual
"""

# Market Data Endpoints
MARKETDATA_OPTION_CHAINS = "/marketdata/v1/chains"
MARKETDATA_PRICE_HISTORY = "/marketdata/v1/pricehistory"
