"""
Property comparison for Clarus Vitae.

- session_storage / events: browser-session storage and per-context events
- store: bounded comparison list with cross-context sync
- subscription: reactive wrapper for UI code
- urls: shareable compare links
- export: comparison table export
"""
