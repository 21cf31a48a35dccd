"""
Application Layer

Orchestrates domain objects and infrastructure to fulfil the recommendation
use cases.

Structure:
- services/: The recommendation engine and its result objects
- interfaces/: Port interfaces for infrastructure adapters
"""
