app_name = "shelter_scheduling"
app_title = "Shelter Scheduling"
app_publisher = "Shelter Portal Developers"
app_description = "Volunteer schedules, pet rules and adoption visit availability for shelters"
app_email = "dev@shelterportal.org"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# User Data Protection
# --------------------

user_data_fields = [
	{
		"doctype": "Shelter Team Member",
		"filter_by": "user",
		"redact_fields": ["full_name"],
		"partial": 1,
	},
]
