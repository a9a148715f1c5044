"""NiceGUI front panel and dev panel."""
