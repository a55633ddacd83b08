"""Core modules for learnhub.

- recurrence: recurring calendar block dates
- streaks: consecutive-day streak computation
- progress: lesson completion, daily counts, monthly aggregates
- dashboard: summary numbers for the home view
- library: combined course/book listing and filters
- course_editor: course authoring (lessons, order, tags)
- calendar_view: month grid with blocks and completions
- pdf_pages: PDF page count and rendering for the book viewer
- uploads: validated book and lesson media uploads
"""
