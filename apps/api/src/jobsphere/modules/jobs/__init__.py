"""
Jobs Module

Job postings, the public job search and its Redis-backed listing cache.

API Endpoints:
- GET /jobs - Public search (cached, approved jobs only)
- GET /jobs/mine - Company's own postings (uncached)
- GET /jobs/{id} - Job detail (uncached)
- POST /jobs - Company creates a posting
- PATCH /jobs/{id} - Owner or admin edits a posting
- DELETE /jobs/{id} - Owner or admin deletes a posting and its applications
- Admin approval lives at PATCH /admin/jobs/{id}
"""
