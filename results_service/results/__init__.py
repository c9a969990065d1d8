"""
Results API package.

Examination results are held in an in-memory ``ResultStore`` owned by the
application; the router validates input, derives grades and GPA figures and
serializes records as JSON.
"""
