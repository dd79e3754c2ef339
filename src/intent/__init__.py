"""Intent classification and slot extraction.

The intent layer converts an English question about employees into an `IntentLabel` plus typed
`Slots` (canonical field markers, resolved employee ids, dates and a comparison operator), which
the query executor then applies to the employee directory.
"""
