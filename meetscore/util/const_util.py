class CONST:
	"""A class to store application constants with IntelliSense support."""

	class EVENT_KIND:
		INDIVIDUAL = "Individual"
		RELAY = "Relay"
		ALL = [INDIVIDUAL, RELAY]

	class MEASUREMENT_KIND:
		TIMED = "Timed"
		MEASURED = "Measured"
		ALL = [TIMED, MEASURED]

	class SORT_KEY:
		TOTAL_POINTS = "totalPoints"
		POINTS_PER_MEET = "pointsPerMeet"
		POINTS_PER_EVENT = "pointsPerEvent"
		NUM_MEETS = "numMeets"
		ALL = [TOTAL_POINTS, POINTS_PER_MEET, POINTS_PER_EVENT, NUM_MEETS]

	class TABLE:
		SEASONS = "seasons"
		MEETS = "meets"
		ATHLETES = "athletes"
		EVENTS = "events"
		ALL = [SEASONS, MEETS, ATHLETES, EVENTS]

	# Season filter value meaning "every season"
	ALL_SEASONS = "All"

	NON_FINISH_MARKS = ("dnf", "dns")
