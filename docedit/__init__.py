"""Rich-text document model and DOCX conversion engine.

Packages:
- docedit.model: StyleState, Run, Block and DocumentModel
- docedit.walker: markup helpers, RunBuilder and the tree walker
- docedit.docs: DOCX import/export and the background pipeline
- docedit.editor: editable markup session and formatting commands
"""
