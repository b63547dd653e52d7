"""Browser-side collaborators: the Playwright driver and the system clipboard.

The forum flows only see the ``RemoteDriver`` and ``ClipboardProvider``
protocols, so tests substitute fakes without launching a browser.
"""
