from blinker import Namespace

_signals = Namespace()

# Sent by PurgeController around the removal of the cache zone. Receivers
# get the controller as sender and no payload; use them to flush other
# cache layers in the same cycle.
before_purge = _signals.signal("before-purge")
after_purge = _signals.signal("after-purge")
