# stockwatch/exceptions.py

"""Exception hierarchy for the scrape/diff/notify pipeline."""


class StockwatchError(Exception):
    """Base class for all stockwatch errors."""


class ScrapeError(StockwatchError):
    """The catalog page could not be rendered or extracted.

    Fatal to a pipeline run: no partial product list is returned.
    """


class StoreError(StockwatchError):
    """A baseline store request failed."""
