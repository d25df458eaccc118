# Services package init
"""
FitLog Backend - Services Layer
=================================

What:  Business logic between the routes (HTTP) and the two Google APIs.
How:   Services are constructed once by the app factory from the frozen
       Settings and reached by routes through FastAPI dependencies.

Service Inventory:
    - SheetsService: append/read rows of a spreadsheet tab (Sheets API v4)
    - LLMService (abstract): interface for image metric extraction
    - GeminiService: concrete implementation using Google Gemini
    - LogService: orchestrates submit, analyze + auto-save, read, seed
"""
