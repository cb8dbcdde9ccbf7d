"""
Report rendering: console text, JSON and Markdown files.
"""
