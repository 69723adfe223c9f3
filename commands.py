# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install the project with test dependencies
# python -m pip install -e ".[test]"

# Run the full test suite (Postgres tests under tests/db skip unless DATABASE_URL is set)
# python -m pytest

# Run focused test files
# python -m pytest tests/test_matcher.py tests/test_job_cache.py
# python -m pytest tests/test_refresh_coordinator.py
# python -m pytest tests/test_clients.py
# python -m pytest tests/test_api_routes.py tests/test_security_headers.py
# python -m pytest tests/test_worker.py tests/test_email_utils.py
# DATABASE_URL=postgresql://localhost/job_alerts_test python -m pytest tests/db

# Start the API locally (with env vars loaded)
# python -m dotenv run -- python -m uvicorn app.api:app --reload

# Run the alert delivery worker
# python -m dotenv run -- python -m worker.main
# RUN_ONCE=true python -m dotenv run -- python -m worker.main

# Drive the API by hand (device reports location, then refreshes)
# curl -X POST localhost:8000/location/permission -H 'Content-Type: application/json' -d '{"granted": true}'
# curl -X POST localhost:8000/location -H 'Content-Type: application/json' -d '{"latitude": 43.70, "longitude": -79.40}'
# curl -X PUT localhost:8000/radius -H 'Content-Type: application/json' -d '{"radius_km": "5"}'
# curl -X POST localhost:8000/refresh -H "Authorization: Bearer $TOKEN"

# Simulate refresh cycles against the job directory without touching Postgres
# python -m scripts.simulate_refresh --lat 43.70 --lon -79.40 --radius 5 --cycles 2

# Inspect the database (example queries)
# python scripts/db_shell.py "SELECT key, value, updated_at FROM preferences"
# python scripts/db_shell.py "SELECT id, user_id, job_id, status, deliver_at FROM alert_deliveries ORDER BY id DESC LIMIT 10"
# python -m scripts.check_user_alerts <user_id>
