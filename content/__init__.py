"""
Pure helpers for portfolio content: record types, slugs, tables of
contents, blog archive filtering, share links and email templates.
"""
