"""Services package - Business logic layer for Bar Costing.

This package contains all service modules that provide business logic
and database operations for the application.

Architecture:
- Costing engine (costing/): Pure calculations, no database access
- Services: Stateless functions organized by domain, wrapping the engine
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Validation: Input validation before database operations

Service Modules:
- ingredient_service: Ingredient catalog CRUD and stock summaries
- stock_service: Purchase lots, manual adjustments, depletion history
- drink_service: Drink catalog, serving cost, derived alcoholic flag
- simulation_service: Event cost simulator
- event_service: Event planning, estimation and completion

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured operation logging
- dto_utils: Cost and quantity formatting
"""

# Service modules
from . import (
    database,
    exceptions,
    logging_utils,
    dto_utils,
    ingredient_service,
    stock_service,
    drink_service,
    event_service,
    simulation_service,
)
