# Routes package init
"""
FitLog Backend - API Routes Package
=====================================

Route Inventory:
    - logs.py:     POST /submit          (append a row to a tab)
                   GET  /data            (read all rows of a tab)
                   POST /seed-schedule   (populate the Schedule tab)
    - analyze.py:  POST /analyze-image   (Gemini cardio extraction + auto-save)
    - health.py:   GET  /health          (liveness and configuration status)

Routes handle HTTP concerns only: pull data out of the request, call
LogService, shape the response. Handlers that wait on Google APIs are plain
`def` functions so FastAPI runs each one on its worker thread pool.
"""
