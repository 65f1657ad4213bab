"""
Fantasy cricket leaderboard.

Joins user team selections to player and rank workbooks, totals each user's
team and ranks the users, and lists the top performers per role.

Subpackages:
    validation: typed record shapes for the three sources
    scoring: indices, roster resolution, totals, ranking, role buckets
    pipeline: end-to-end run and CLI
    export: JSON / CSV / Excel output for the site
"""
