"""
randobot - question answering backend for a hiking photo gallery

The crawl package indexes the site into a JSON document store, the qa
package answers French questions against it, and the api package exposes
both over HTTP.
"""

__version__ = "1.0.0"
