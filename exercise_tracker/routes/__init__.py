# Routes package init
"""
Exercise Tracker — API Routes Package
======================================

Route Inventory:
    - pages.py:      GET  /                            (static HTML page)
    - users.py:      POST /api/users                   (create user)
                     GET  /api/users                   (list users)
    - exercises.py:  POST /api/users/{id}/exercises    (add exercise)
                     GET  /api/users/{id}/logs         (exercise log)
    - health.py:     GET  /health                      (service health check)

Routes stay thin: read the request, validate it into a typed model, call a
service, return its response model.
"""
