ISO_WEEKDAYS = (1, 2, 3, 4, 5, 6, 7)
MINUTES_PER_DAY = 24 * 60

WEEKDAY_NAMES: dict[int, str] = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}

# runs longer than this are rendered as "first – last"
DAY_RANGE_MIN_RUN = 3
