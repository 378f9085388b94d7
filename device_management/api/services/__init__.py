# This file marks the services package that holds request-level coordination logic.
