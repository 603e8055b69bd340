# Services package init
"""
Exercise Tracker — Services Layer
==================================

What:  The query/response mapper between routes (HTTP) and the store.
How:   Services take an AsyncSession plus already-validated request models,
       build store filters, and shape rows into response models.

Service Inventory:
    - UserService:     create and list users, resolve a user by path id
    - ExerciseService: add exercises, build date-filtered logs
"""
