"""Static sample exchanges served by the offline load path."""

from src.coinmarket.model.currency import Currency
from src.coinmarket.model.exchange import Exchange, ExchangeUrls

SAMPLE_EXCHANGES: tuple[Exchange, ...] = (
    Exchange(
        id=270,
        name="Binance",
        slug="binance",
        logo="https://s2.coinmarketcap.com/static/img/exchanges/64x64/270.png",
        description=(
            "Binance is a global cryptocurrency exchange that provides a platform "
            "for trading more than 100 cryptocurrencies."
        ),
        launch_date="2017-07-14T00:00:00.000Z",
        urls=ExchangeUrls(
            website=["https://www.binance.com"],
            twitter=["https://twitter.com/binance"],
        ),
        spot_volume_usd=15_000_000_000.50,
        maker_fee=0.1,
        taker_fee=0.1,
        weekly_visits=50_000_000,
        num_markets=1500,
        num_coins=350,
        fiats=[
            Currency(id=1, name="US Dollar", symbol="USD", slug="usd", price_usd=1.0),
            Currency(id=2, name="Euro", symbol="EUR", slug="eur", price_usd=1.08),
        ],
    ),
    Exchange(
        id=311,
        name="Coinbase Exchange",
        slug="coinbase-exchange",
        logo="https://s2.coinmarketcap.com/static/img/exchanges/64x64/311.png",
        description=(
            "Coinbase Pro is a secure platform that makes it easy to buy, sell, "
            "and store cryptocurrency."
        ),
        launch_date="2015-01-25T00:00:00.000Z",
        urls=ExchangeUrls(
            website=["https://pro.coinbase.com"],
            twitter=["https://twitter.com/coinbase"],
        ),
        spot_volume_usd=2_500_000_000.75,
        maker_fee=0.5,
        taker_fee=0.5,
        weekly_visits=20_000_000,
        num_markets=200,
        num_coins=100,
        fiats=[
            Currency(id=1, name="US Dollar", symbol="USD", slug="usd", price_usd=1.0),
            Currency(id=3, name="British Pound", symbol="GBP", slug="gbp", price_usd=1.27),
        ],
    ),
    Exchange(
        id=24,
        name="Kraken",
        slug="kraken",
        logo="https://s2.coinmarketcap.com/static/img/exchanges/64x64/24.png",
        description=(
            "Kraken is a cryptocurrency exchange and bank that offers capital funding."
        ),
        launch_date="2013-09-10T00:00:00.000Z",
        urls=ExchangeUrls(
            website=["https://www.kraken.com"],
            twitter=["https://twitter.com/krakenfx"],
        ),
        spot_volume_usd=1_800_000_000.25,
        maker_fee=0.16,
        taker_fee=0.26,
        weekly_visits=15_000_000,
        num_markets=300,
        num_coins=80,
        fiats=[
            Currency(id=1, name="US Dollar", symbol="USD", slug="usd", price_usd=1.0),
            Currency(id=4, name="Japanese Yen", symbol="JPY", slug="jpy", price_usd=0.0067),
        ],
    ),
)
