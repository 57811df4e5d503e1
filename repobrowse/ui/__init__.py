"""UI package for the repository browser.

The view layer is a set of message-driven components:

- ``RepoView`` composes the panes behind a tab bar and routes messages
- Panes (readme, files, log, refs) show one kind of repository content
- ``RepoBrowserApp`` hosts the view in a Textual terminal application

Components never block: slow work is returned as tasks that the host runs
outside the update loop and feeds back as messages.
"""
