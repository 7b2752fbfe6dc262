"""Standalone NiceGUI app serving the Fear & Greed dashboard."""
