"""Browser automation modules (Playwright, async API).

``session`` owns the shared browser, ``interaction`` drives the answer
page, ``extraction`` reads and classifies the answer text and ``capture``
renders the final payload.  ``retry`` and ``diagnostics`` guard every
network step.
"""
