"""
Nutri AI meal-photo analyzer:
- acquire: uploaded files and camera snapshots as data-URI images
- inference: single-call vision completion
- utils: JSON extraction from completion text
- renderer: nutrition object -> display values / HTML
- session, controller: screen state machine and its effects
- main: FastAPI app
"""
