"""Sales reporting for the sales admin API

This package lists recorded sales and turns them into revenue reports:
revenue bucketed by day, week, month or year, and revenue compared
between two date ranges or two categories.

The bucketing and comparison logic (``aggregation`` and ``comparison``)
is pure computation. It reads sales only through the ``SalesStore``
protocol in ``store``, so it can be exercised without a database."""
