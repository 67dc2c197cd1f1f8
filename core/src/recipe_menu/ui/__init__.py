"""Isomorphic menu UI.

- components are plain functions producing element trees
- the server renders them to HTML once at startup
- ``static/bundle.js`` renders the same components again in the browser over
  the data embedded in the page
"""
