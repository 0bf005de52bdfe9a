"""Errors raised by the UnitFlow application layer.

Validation problems use protean's ``ValidationError``; this module only adds
the fault that protean has no name for.
"""

from protean.exceptions import DatabaseError, ExpectedVersionError
from sqlalchemy.exc import SQLAlchemyError


class StorageFault(Exception):
    """The device store rejected a write (capacity, I/O, locked database).

    The failed append leaves the previously stored entries untouched.
    """


# Failures of the device store itself; anything else is a defect and propagates
PERSISTENCE_ERRORS = (DatabaseError, ExpectedVersionError, SQLAlchemyError, OSError)
