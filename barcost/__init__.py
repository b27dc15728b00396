"""Bar costing engine.

Estimates drink consumption, ingredient cost and event pricing for bar and
catering operators, and tracks FIFO depletion of lot-tracked stock.
"""

__version__ = "0.1.0"
