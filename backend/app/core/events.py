# Log event tags for chat state changes. Services log them as the first
# token of the message so deployments can grep or alert on them.

PM_CREATED = "pm.created"
PM_REOPENED = "pm.reopened"

CHANNEL_CREATED = "channel.created"
CHANNEL_JOINED = "channel.joined"
CHANNEL_PARTED = "channel.parted"

MESSAGE_NEW = "message.new"

RELATION_SET = "relation.set"
RELATION_REMOVED = "relation.removed"

USER_RESTRICTED = "user.restricted"
USER_UNRESTRICTED = "user.unrestricted"
USER_SILENCED = "user.silenced"
