"""
Applications Module

Student applications to job postings. One application per student per job.
"""
