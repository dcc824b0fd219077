# Document store layout written by the offline publisher.
MERKLE_ROOTS_COLL = "merkleRoots"
MERKLE_ROOT_VERSIONS_COLL = "merkleRootVersions"
MERKLE_ROOT_VERSION_LEAVES_COLL = "merkleRootVersionLeaves"

REWARDS_COLL = "rewards"
USERS_COLL = "users"
USER_CURATION_COLL = "curation"
USER_REWARDS_COLL = "userRewards"
USER_ALL_TIME_REWARDS_COLL = "userAllTimeRewards"
USER_ALL_TIME_TXN_FEE_REWARDS_DOC = "userAllTimeTransactionFeeRewards"
USER_REWARD_PHASES_COLL = "userRewardPhases"
REFERRAL_REWARDS_COLL = "flowBetaReferralRewards"
REFERRAL_CODES_COLL = "flowBetaReferralCodes"

REFERRAL_LINK_BASE_URL = "https://flow.so/?ref="

UNPUBLISHED_NONCE = -1
