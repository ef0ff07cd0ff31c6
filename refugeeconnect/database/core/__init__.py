"""
Service layer.

- funcs: accounts, information records, home/dashboard feeds, community.
- interactions: the assistant interaction log (record, history, feedback, analytics).
"""
