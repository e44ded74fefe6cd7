"""Reviews domain - patient ratings of completed appointments"""
