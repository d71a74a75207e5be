"""
Feature modules for KilluStats.

- shared: base service/repository, domain exceptions, identifier validators
- stats: the statistic resolvers and the orchestrator
"""
