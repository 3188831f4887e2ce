"""staffwatch: commitment exception reports for staffing planners."""
