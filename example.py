from decimal import Decimal

from fx_bcv import ConversionDirection, FxBcv

print(FxBcv.__version__)  # 0.1.0

# Default usage: cache in the user data directory, live BCV page
fx = FxBcv()

# Rates a conversion would use (previous first, then latest)
print(fx.rates())

# 100 USD -> VES with every available rate
for result in fx.convert(Decimal("100")):
    print(result, result.rate_date)

# 3650 VES -> USD with the latest rate only, rates rounded to 2 decimals
print(fx.convert("3650", ConversionDirection.INVERSE, last_rate_only=True, precision=2))

# Use a project-local cache file instead
local = FxBcv("dobsdata.json")
print(local.load_state())
